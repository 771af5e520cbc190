import asyncio
import sys
from pathlib import Path

import click

from pushgate.errors import QueueError
from pushgate.queue import JobDescriptor, RedisJobQueue
from pushgate.validation import PushEventValidator, parse_event


@click.group()
def cli() -> None:
    pass


@cli.command()
def http_server() -> None:
    """
    run HTTP server used for receiving push webhooks
    """
    from pushgate.entrypoints.ingest import main

    main()


@cli.command(help="check a push event payload against the webhook schema")
@click.argument("event_path", type=click.Path(exists=True, dir_okay=False))
def validate_event(event_path: str) -> None:
    event = parse_event(Path(event_path).read_bytes())
    diagnostics = PushEventValidator().validate(event)
    if not diagnostics:
        click.echo("OK")
        return
    for diagnostic in diagnostics:
        click.echo(str(diagnostic))
    sys.exit(1)


@cli.command(help="queue a build for a push event payload, bypassing HTTP")
@click.argument("event_path", type=click.Path(exists=True, dir_okay=False))
def enqueue_event(event_path: str) -> None:
    """
    Useful for re-running a build for a delivery the webhook already
    accepted, or for testing a worker against a hand written payload.
    """
    from pushgate import app_config as conf
    from pushgate.redis_client import create_connection

    event = parse_event(Path(event_path).read_bytes())
    diagnostics = PushEventValidator().validate(event)
    if diagnostics:
        for diagnostic in diagnostics:
            click.echo(str(diagnostic), err=True)
        sys.exit(1)

    async def enqueue() -> str:
        redis = create_connection()
        try:
            queue = RedisJobQueue(redis, conf.QUEUE_NAME, prefix=conf.QUEUE_PREFIX)
            job = JobDescriptor.build(event)
            ack = await queue.enqueue(job.job_type, job.payload)
        finally:
            await redis.aclose()
        return ack.model_dump_json()

    try:
        ack = asyncio.run(enqueue())
    except QueueError as e:
        raise click.ClickException(
            f"could not enqueue onto {e.queue!r}: {e.message}"
        ) from e
    click.echo(ack)
