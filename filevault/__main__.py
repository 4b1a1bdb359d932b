import uvicorn

from filevault.core.config import get_settings


def main() -> None:
    """以uvicorn启动服务"""
    settings = get_settings()
    uvicorn.run(
        "filevault.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # 日志由setup_logging统一配置
    )


if __name__ == "__main__":
    main()
