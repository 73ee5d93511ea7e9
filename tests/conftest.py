import os

# keep telelog off the console while pytest captures output
os.environ.setdefault("MACRO_ENGINE_DISABLE_CONSOLE", "1")
os.environ.setdefault("MACRO_ENGINE_LOG_LEVEL", "WARNING")
