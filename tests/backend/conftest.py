import os
import tempfile

# Settings are read once at import time, so point every on-disk location at a
# scratch directory before the application is imported.
_scratch = tempfile.mkdtemp(prefix="inside-notes-tests-")
os.environ["AUDIO_UPLOAD_DIR"] = os.path.join(_scratch, "uploads")
os.environ["REPORT_DIR"] = os.path.join(_scratch, "reports")
os.environ["SESSION_FILE"] = os.path.join(_scratch, "session.json")
os.environ["AI_BACKEND"] = "demo"
os.environ["ENABLE_API_AUTH"] = "false"
os.environ["USE_SQL_REPOS"] = "false"
os.environ.pop("REPORT_WEBHOOK_URL", None)
