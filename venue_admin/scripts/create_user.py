# venue_admin/scripts/create_user.py
import argparse
import asyncio
import getpass
import logging

from pydantic import ValidationError as SchemaValidationError

from venue_admin.core.database import db_helper
from venue_admin.core.exceptions import AppException
from venue_admin.core.schemas.auth import UserCreate
from venue_admin.models.user import UserRole
from venue_admin.repositories.user_repository import UserRepository
from venue_admin.services.auth_service import AuthService

logger = logging.getLogger(__name__)


async def create_user(data: UserCreate) -> int:
    try:
        async with db_helper.session_factory() as session:
            user = await AuthService(UserRepository(session)).create_user(
                data.email, data.password, UserRole(data.role), data.full_name
            )
    finally:
        await db_helper.dispose()
    return user.id


def main():
    parser = argparse.ArgumentParser(description="Create a back office account")
    parser.add_argument("email")
    parser.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.ADMIN.value)
    parser.add_argument("--full-name", default=None)
    parser.add_argument("--password", default=None, help="prompted for when omitted")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    try:
        data = UserCreate(
            email=args.email,
            password=args.password or getpass.getpass("Password: "),
            role=args.role,
            full_name=args.full_name,
        )
    except SchemaValidationError as e:
        for error in e.errors():
            logger.error(f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}")
        raise SystemExit(2)

    try:
        user_id = asyncio.run(create_user(data))
    except AppException as e:
        logger.error(f"Could not create {data.email}: {e.detail}")
        raise SystemExit(1)
    logger.info(f"Created {data.role} {data.email} (id={user_id})")


if __name__ == "__main__":
    main()
