import asyncio
import typer
import uvicorn
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

import app.db_models # noqa: F401

from app.auth.passwords import PasswordHasher
from app.config import settings
from app.database import Base, async_session_factory, engine
from app.exceptions import EmailInUse
from app.users.models import User as UserModel, UserRole
from app.users.repository import UserRepository
from app.users.schema import UserCreate
from app.users.service import UserService

cli = typer.Typer()

SEED_USERS = [
    {"name": "Administrador", "email": "admin@conectar.com", "password": "admin123", "role": UserRole.ADMIN},
    {"name": "Usuário Teste", "email": "user@conectar.com", "password": "user123", "role": UserRole.USER},
]


def _user_service(db: AsyncSession) -> UserService:
    return UserService(UserRepository(db), PasswordHasher())


async def create_admin_runner(name: str, email: str, password: str, db: AsyncSession) -> UserModel:
    print("--- Admin User Creation ---")
    user_data = UserCreate(name=name, email=email, password=password, role=UserRole.ADMIN)

    print(f"Creating admin user '{user_data.email}'...")
    admin_user = await _user_service(db).create_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
    )

    print("\n✅ Admin user created successfully!")
    print(f"   ID: {admin_user.id}")
    print(f"   Email: {admin_user.email}")
    print(f"   Role: {admin_user.role}")
    return admin_user


async def seed_runner(db: AsyncSession) -> int:
    """Creates the default admin and test user when missing. Returns how many were created."""
    service = _user_service(db)
    created = 0
    for entry in SEED_USERS:
        if await service.repository.find_by_email(entry["email"]):
            print(f"ℹ️ {entry['email']} already exists")
            continue
        await service.create_user(**entry)
        created += 1
        print(f"✅ Created {entry['role'].value} {entry['email']} (password: {entry['password']})")
    return created


@cli.command(name="init-db")
def init_db():
    """
    Creates all tables that do not exist yet.
    """
    async def main():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(main())
    print("✅ Database tables created")


@cli.command(name="create-admin")
def createadmin(
    name: str = typer.Option(..., "--name", "-n", help="Admin's full name."),
    email: str = typer.Option(..., "--email", "-e", help="Admin's email address."),
    password: str = typer.Option(..., "--password", "-p", help="Admin's secure password."),
):
    """
    Creates a new user with 'admin' privileges in the database.
    """
    async def main():
        async with async_session_factory() as session:
            await create_admin_runner(name=name, email=email, password=password, db=session)

    try:
        asyncio.run(main())
    except ValidationError as e:
        print("\n❌ Invalid admin data:")
        for error in e.errors():
            print(f"   {'.'.join(str(part) for part in error['loc'])}: {error['msg']}")
        raise typer.Exit(code=1)
    except EmailInUse:
        print(f"\n❌ Email already registered: {email}")
        raise typer.Exit(code=1)


@cli.command()
def seed():
    """
    Creates the default admin (admin@conectar.com) and test user (user@conectar.com).
    """
    async def main():
        async with async_session_factory() as session:
            return await seed_runner(session)

    created = asyncio.run(main())
    print(f"--- Seed finished: {created} user(s) created ---")


@cli.command()
def serve(reload: bool = typer.Option(False, "--reload", help="Restart on code changes.")):
    """
    Runs the API with uvicorn on APP_HOST:APP_PORT.
    """
    uvicorn.run("app.main:app", host=settings.APP_HOST, port=settings.APP_PORT, reload=reload)


if __name__ == "__main__":
    cli()
