import json
from pathlib import Path

VALID = {
    "name": "Jo",
    "email": "jo@x.com",
    "jobTitle": "Eng",
    "companyName": "Acme",
    "topic": "AI in HR",
}


def store_path(app) -> Path:
    return Path(app.config["FEEDBACK_DATA_DIR"]) / app.config["FEEDBACK_DATA_FILE"]


def read_file_store(app):
    return json.loads(store_path(app).read_text(encoding="utf-8"))


def write_file_store(app, records):
    store_path(app).write_text(json.dumps(records), encoding="utf-8")
