import asyncio
from github_manager.config import settings
from github_manager.github.manager import GitHubManager
from github_manager.utils.logger import get_logger

logger = get_logger(__name__)


async def main():
    """メインエントリーポイント"""
    if not settings.GITHUB_TOKEN:
        logger.error("GITHUB_TOKEN is not set")
        return

    async with GitHubManager() as manager:
        manager.initialize_integration(settings.GITHUB_TOKEN)

        # 通知の購読
        manager.signals.user_name_received.connect(
            lambda login: logger.info(f"Logged in as {login}")
        )
        manager.signals.repositories_loaded.connect(
            lambda repos: logger.info(
                "Repositories: " + ", ".join(f"{r.owner}/{r.repository_name}" for r in repos)
            )
        )
        manager.signals.project_details_loaded.connect(
            lambda project: logger.info(
                f"Project '{project.title}': {len(project.items)} items, "
                f"{len(project.columns)} columns"
            )
        )

        await manager.fetch_current_user()
        await manager.fetch_user_repositories()

        projects = await manager.fetch_user_projects() or []
        for project in projects:
            manager.dispatch(manager.fetch_project_details(project.title))


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application stopped")
