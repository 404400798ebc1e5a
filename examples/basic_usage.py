import asyncio

from codesessions import CodeSession, FileTokenSource, SessionClient, Settings
from codesessions.utils.log import get_logger

log = get_logger(__name__)


async def main():
    # Reads CODESESSIONS_ENDPOINT / CODESESSIONS_TOKEN_FILE from the environment
    client = SessionClient(Settings.from_env(), FileTokenSource.from_env())

    async with CodeSession(client) as session:
        log.info(f"Using session {session.session_id}")

        log.info("Step 1: Running code...")
        output = await session.execute_code("print('Hello, World!')")
        log.info(f"   Output: {output}")

        log.info("Step 2: Uploading a file...")
        meta = await session.upload_file("test.txt", b"This is a test file.")
        log.info(f"   Uploaded {meta.filename} ({meta.size_bytes} bytes)")

        log.info("Step 3: Listing files...")
        for f in await session.list_files():
            log.info(f"   {f.filename}  {f.size_bytes}  {f.last_modified_time}")

        log.info("Step 4: Downloading the file back...")
        content = await session.download_file("test.txt")
        log.info(f"   Content: {content.decode('utf-8')}")

        log.info("Step 5: Installed packages...")
        packages = await session.get_packages()
        log.info(f"   {len(packages)} packages installed")


if __name__ == "__main__":
    asyncio.run(main())
