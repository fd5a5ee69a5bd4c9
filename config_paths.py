import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "xbase")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
CHAT_HISTORY_PATH = os.path.join(CONFIG_DIR, "chat_history.json")

# default settings
BACKEND_URL_DEFAULT = ""
FILES_PROXY_URL_DEFAULT = "http://localhost:3000/api/files"
FILES_UPDATE_URL_DEFAULT = "http://localhost:3000/api/files/update"
UPLOAD_URL_DEFAULT = "http://localhost:3000/api/upload"
BUCKET_DEFAULT = "XBase_bucket1"
TIMEOUT_SECONDS_DEFAULT = 30.0

# config.json key -> (cfg key, env var)
_STRING_SETTINGS = {
    "backend_url": ("BACKEND_URL", "XBASE_BACKEND_URL"),
    "files_proxy_url": ("FILES_PROXY_URL", "XBASE_FILES_PROXY_URL"),
    "files_update_url": ("FILES_UPDATE_URL", "XBASE_FILES_UPDATE_URL"),
    "upload_url": ("UPLOAD_URL", "XBASE_UPLOAD_URL"),
    "bucket": ("BUCKET", "XBASE_BUCKET"),
}


class ConfigError(RuntimeError):
    pass


def load_config(environ=None):
    env = os.environ if environ is None else environ
    cfg = {
        "BACKEND_URL": BACKEND_URL_DEFAULT,
        "FILES_PROXY_URL": FILES_PROXY_URL_DEFAULT,
        "FILES_UPDATE_URL": FILES_UPDATE_URL_DEFAULT,
        "UPLOAD_URL": UPLOAD_URL_DEFAULT,
        "BUCKET": BUCKET_DEFAULT,
        "TIMEOUT_SECONDS": TIMEOUT_SECONDS_DEFAULT,
    }

    if os.path.exists(CONFIG_JSON):
        try:
            import json

            with open(CONFIG_JSON, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                for json_key, (cfg_key, _) in _STRING_SETTINGS.items():
                    value = data.get(json_key)
                    if isinstance(value, str) and value.strip():
                        cfg[cfg_key] = value.strip()
                timeout = data.get("timeout_seconds")
                if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
                    if timeout > 0:
                        cfg["TIMEOUT_SECONDS"] = float(timeout)
        except Exception:
            pass

    for cfg_key, env_var in _STRING_SETTINGS.values():
        value = env.get(env_var)
        if value and value.strip():
            cfg[cfg_key] = value.strip()

    cfg["BACKEND_URL"] = cfg["BACKEND_URL"].rstrip("/")
    return cfg


def require_backend_url(cfg) -> str:
    url = cfg.get("BACKEND_URL") or ""
    if not url:
        raise ConfigError(
            "Backend URL not configured (set XBASE_BACKEND_URL or backend_url in "
            f"{CONFIG_JSON})"
        )
    return url
