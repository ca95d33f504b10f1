import sys
from datetime import timedelta

from dotenv import load_dotenv

from mixtape.auth import create_access_token

load_dotenv()

if len(sys.argv) < 2:
    print("usage: python tools/issue_token.py <user_id> [minutes]")
    sys.exit(1)

user_id = sys.argv[1]
minutes = int(sys.argv[2]) if len(sys.argv) > 2 else 120

token = create_access_token(user_id, expires_delta=timedelta(minutes=minutes))
print(f"Bearer token for {user_id} (valid {minutes} min):")
print(token)
