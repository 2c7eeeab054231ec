# run_dev.py
import os
import sys

from dotenv import load_dotenv


# Carga .env si existe (Settings también lo lee, esto es para HOST/PORT/RELOAD)
if os.path.exists(".env"):
    load_dotenv(".env")


def main():
    import uvicorn

    spec = os.getenv("APP_MODULE", "app.main:app")
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    reload_env = os.getenv("RELOAD")
    if reload_env is not None:
        reload_flag = reload_env.strip() in ("1", "true", "True", "yes", "on")
    else:
        # en Windows el reloader da problemas con el loop
        reload_flag = not sys.platform.startswith("win")

    print(f"🔗 API local: http://127.0.0.1:{port}")
    print(f"🌀 reload={'ON' if reload_flag else 'OFF'}")

    uvicorn.run(
        spec,
        host=host,
        port=port,
        reload=reload_flag,
        reload_dirs=["app"],
        log_level=os.getenv("LOG_LEVEL", "info"),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
