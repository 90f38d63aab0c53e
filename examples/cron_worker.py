"""
Sample scheduled handler.

Trigger it through the development host:
    eventglue serve examples/cron_worker.py
    curl "http://127.0.0.1:8787/__scheduled?cron=*/5+*+*+*+*"
"""

from eventglue import event, scheduled
from eventglue.runtime import console_log


@event(scheduled)
async def tick(event, env, ctx):
    console_log("cron fired:", event.cron, event.scheduled_at.isoformat())
