"""
Create an administrator, or promote an existing account.

Uso:
    python create_admin.py admin@example.com 'a-strong-password'
"""
import sys

from app.database import session_scope
from app.models.user import UserRole
from app.services.identity import IdentityDirectory

if len(sys.argv) != 3:
    sys.exit("usage: python create_admin.py <email> <password>")

email, password = sys.argv[1].strip().lower(), sys.argv[2]

with session_scope() as db:
    directory = IdentityDirectory(db)
    user = directory.find_by_email(email)
    if user:
        user.role = UserRole.ADMIN
        print(f"Admin promovido: id={user.id}")
    else:
        user = directory.create_account(
            email=email,
            display_name=email.split("@")[0],
            password=password,
            role=UserRole.ADMIN,
            confirmed=True,
        )
        print(f"Admin criado: id={user.id}")
