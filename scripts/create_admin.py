# scripts/create_admin.py

import asyncio
import typer

from labtrack.core.config import settings
from labtrack.core.security import get_password_hash
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.usr.models import UserRole
from labtrack.storage import DatabaseStorage

cli = typer.Typer()


async def create_admin_user(storage: DatabaseStorage, user_in: usr_schemas.UserCreate) -> bool:
    """
    데이터베이스에 관리자 사용자를 생성하는 비동기 함수
    """
    if await storage.get_user_by_username(user_in.username):
        typer.echo(f"오류: 이미 존재하는 사용자명입니다: {user_in.username}")
        return False

    if await storage.get_user_by_barcode(user_in.barcode):
        typer.echo(f"오류: 이미 존재하는 사원증 바코드입니다: {user_in.barcode}")
        return False

    await storage.create_user(user_in, get_password_hash(user_in.password))
    typer.echo(f"관리자 계정이 성공적으로 생성되었습니다: {user_in.username} ({user_in.barcode})")
    return True


@cli.command()
def main(
    username: str = typer.Option(
        ..., '--username', '-u',
        prompt="관리자 사용자명(ID)을 입력하세요",
        help="로그인 시 사용할 사용자명(ID)입니다."
    ),
    barcode: str = typer.Option(
        ..., '--barcode', '-b',
        prompt="사원증 바코드를 입력하세요",
        help="바코드 로그인에 사용할 사원증 바코드입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    name: str = typer.Option(
        "Admin", '--name', '-n',
        prompt="관리자 이름을 입력하세요",
        help="관리자의 표시 이름입니다."
    ),
):
    """
    LabTrack 데이터베이스에 새로운 관리자(Admin)를 생성합니다.
    """
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.")
        raise typer.Abort()

    if settings.DATABASE_URL is None:
        typer.echo("오류: DATABASE_URL 환경 변수가 설정되지 않았습니다.")
        raise typer.Abort()

    user_data = usr_schemas.UserCreate(
        username=username,
        barcode=barcode,
        password=password,
        name=name,
        role=UserRole.ADMIN,
    )

    async def run_creation() -> bool:
        storage = DatabaseStorage(settings.DATABASE_URL.get_secret_value())
        try:
            await storage.initialize()
            return await create_admin_user(storage, user_data)
        finally:
            await storage.close()

    if not asyncio.run(run_creation()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
