"""
Wrapper script for running the server without the CLI.
"""

if __name__ == "__main__":
    import uvicorn

    from relay.settings import app_settings
    from relay.uvicorn_filters import uvicorn_log_config

    uvicorn.run(
        "relay:application",
        factory=True,
        host=app_settings.HOST,
        port=app_settings.PORT,
        log_config=uvicorn_log_config(),
    )
