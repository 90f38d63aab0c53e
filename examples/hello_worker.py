"""
Sample fetch handler.

Run it with the development host:
    eventglue serve examples/hello_worker.py

or inspect the generated adapter:
    eventglue transform examples/hello_worker.py
"""

from eventglue import event, fetch, respond_with_errors
from eventglue.runtime import Response


@event(fetch, respond_with_errors)
async def main(req, env, ctx):
    if req.path == "/boom":
        raise RuntimeError("boom")

    if req.path == "/echo" and req.method == "POST":
        return Response.from_json({"received": req.json()})

    name = req.query.get("name") or env.get("GREETING_NAME", "world")
    return Response.ok(f"Hello, {name}!")
