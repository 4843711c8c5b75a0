"""
Create test user (uses DATABASE_URL from the environment / .env)
"""
from ecofinance.infrastructure.db.session import get_db
from ecofinance.auth import get_user_by_email, hash_password
from ecofinance.infrastructure.db.models import User

EMAIL = "test@example.com"
PASSWORD = "password123"

db = next(get_db())

existing = get_user_by_email(db, EMAIL)
if existing:
    print(f"User already exists: {EMAIL} (ID: {existing.id})")
else:
    user = User(
        email=EMAIL,
        password_hash=hash_password(PASSWORD),
        first_name="Тест",
        last_name="Пользователь",
    )
    db.add(user)
    db.commit()
    print("Created user:")
    print(f"  Email: {EMAIL}")
    print(f"  Password: {PASSWORD}")

db.close()
