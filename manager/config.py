"""Configuration settings for the files-manager API server and worker."""

import os

from common.constants import SESSION_TTL_SECONDS


DATABASE_PATH = os.environ.get("FM_DATABASE_PATH", "/tmp/files_manager/metadata.db")

FOLDER_PATH = os.environ.get("FOLDER_PATH", "/tmp/files_manager")

REDIS_URL = os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/0")

SERVER_HOST = os.environ.get("FM_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("PORT", "5000"))

SESSION_TTL = int(os.environ.get("FM_SESSION_TTL_SECONDS", str(SESSION_TTL_SECONDS)))

QUEUE_NAME = os.environ.get("FM_QUEUE_NAME", "fileQueue")

WORKER_CONCURRENCY = int(os.environ.get("FM_WORKER_CONCURRENCY", "4"))

JOB_RETRIES = int(os.environ.get("FM_JOB_RETRIES", "3"))

JOB_RETRY_DELAY_SECONDS = float(os.environ.get("FM_JOB_RETRY_DELAY_SECONDS", "1.0"))
