"""
Library lending CLI.

Administrative tasks that have no HTTP endpoint:

Usage:
    lending init-db                          # Create tables
    lending create-category Fantasy          # Add a category
    lending create-employee jdoe jdoe@example.com --first-name John --last-name Doe
    lending serve --port 8000                # Run the API
"""
import argparse
import asyncio
import getpass
import sys
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from lending.core.exceptions import AppException  # noqa: E402
from lending.database import close_db, init_db  # noqa: E402
from lending.dependencies import unit_of_work  # noqa: E402
from lending.models.user import UserRole  # noqa: E402
from lending.schemas.user import UserCreate  # noqa: E402
from lending.services.category_service import CategoryService  # noqa: E402
from lending.services.user_service import UserService  # noqa: E402


class Colors:
    """ANSI color codes for terminal output."""
    GREEN = '\033[92m'
    RED = '\033[91m'
    END = '\033[0m'


def print_success(text: str):
    """Print success message."""
    print(f"{Colors.GREEN}✓ {text}{Colors.END}")


def print_error(text: str):
    """Print error message."""
    print(f"{Colors.RED}✗ {text}{Colors.END}")


async def create_category(name: str) -> None:
    await init_db()
    category = await unit_of_work.run(
        "cli.create_category",
        None,
        lambda repos: CategoryService(repos).create_category(name),
    )
    print_success(f"Created category {category.name} (id={category.id})")


async def create_employee(
    username: str,
    email: str,
    first_name: str,
    last_name: str,
    password: Optional[str],
) -> None:
    await init_db()
    user_data = UserCreate(
        first_name=first_name,
        last_name=last_name,
        username=username,
        email=email,
        password=password or getpass.getpass("Password: "),
        role=UserRole.EMPLOYEE,
    )
    user = await unit_of_work.run(
        "cli.create_employee",
        None,
        lambda repos: UserService(repos).register(user_data),
    )
    print_success(f"Created employee {user.username} (id={user.id})")


async def run_command(args: argparse.Namespace) -> None:
    try:
        if args.command == "init-db":
            await init_db()
            print_success("Tables created")
        elif args.command == "create-category":
            await create_category(args.name)
        elif args.command == "create-employee":
            await create_employee(
                args.username,
                args.email,
                args.first_name,
                args.last_name,
                args.password,
            )
    finally:
        await close_db()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lending",
        description="Library lending administration",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create database tables")

    category = commands.add_parser("create-category", help="Add a category")
    category.add_argument("name")

    employee = commands.add_parser("create-employee", help="Add an employee account")
    employee.add_argument("username")
    employee.add_argument("email")
    employee.add_argument("--first-name", required=True)
    employee.add_argument("--last-name", required=True)
    employee.add_argument("--password", help="Prompted for when omitted")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("lending.main:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    try:
        asyncio.run(run_command(args))
    except AppException as e:
        print_error(e.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
