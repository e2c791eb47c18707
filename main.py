import logging
import signal
import sys
import argparse
import json
import threading
import uuid

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import ServiceException
from database.database import build_engine, build_session_factory
from database.init_db import init_db
from database.uow import matching_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Set on SIGINT/SIGTERM; ranking calls abort with RankingCancelledError
stop_event = threading.Event()


def signal_handler(sig, frame):
    logger.info("Shutdown signal received")
    stop_event.set()


def _uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a valid UUID: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Job match scoring and recommendations")
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to the YAML configuration file')
    sub = parser.add_subparsers(dest='command', required=True)

    score = sub.add_parser('match-score', help='Score one seeker against one job')
    score.add_argument('--seeker', type=_uuid, required=True)
    score.add_argument('--job', type=_uuid, required=True)

    jobs = sub.add_parser('recommend-jobs', help='Recommended jobs for a seeker')
    jobs.add_argument('--seeker', type=_uuid, required=True)
    jobs.add_argument('--limit', type=int)
    jobs.add_argument('--offset', type=int)
    jobs.add_argument('--min-score', type=float, default=0.0)
    jobs.add_argument('--include-applied', action='store_true',
                      help='Keep jobs the seeker already applied to')

    candidates = sub.add_parser('recommend-candidates', help='Recommended candidates for a job')
    candidates.add_argument('--job', type=_uuid, required=True)
    candidates.add_argument('--limit', type=int)
    candidates.add_argument('--offset', type=int)
    candidates.add_argument('--min-score', type=float, default=0.0)
    candidates.add_argument('--applied-only', action='store_true',
                            help='Only seekers who applied to this job')

    recompute = sub.add_parser('recompute-completeness',
                               help='Recompute the stored completeness of one entity')
    target = recompute.add_mutually_exclusive_group(required=True)
    target.add_argument('--seeker', type=_uuid)
    target.add_argument('--job', type=_uuid)
    target.add_argument('--company', type=_uuid)

    sub.add_parser('init-db', help='Create missing tables')
    return parser


def recompute_completeness(args: argparse.Namespace, session_factory, ctx: AppContext) -> str:
    with matching_uow(session_factory, today=ctx.today) as repos:
        if args.seeker is not None:
            kind, entity_id = 'seeker', args.seeker
            percentage = repos.profiles.recompute_completeness(args.seeker)
        elif args.job is not None:
            kind, entity_id = 'job', args.job
            percentage = repos.jobs.recompute_completeness(args.job)
        else:
            kind, entity_id = 'company', args.company
            percentage = repos.companies.recompute_completeness(args.company)

    logger.info(f"Recomputed {kind} {entity_id} completeness: {percentage}%")
    return json.dumps({'kind': kind, 'id': str(entity_id), 'completeness_percentage': percentage})


def run(args: argparse.Namespace) -> str:
    config = load_config(args.config)
    engine = build_engine(config.database.url, echo=config.database.echo)

    if args.command == 'init-db':
        init_db(engine)
        return '{"status": "ok"}'

    ctx = AppContext.build(config)
    session_factory = build_session_factory(engine)

    if args.command == 'recompute-completeness':
        return recompute_completeness(args, session_factory, ctx)

    with matching_uow(session_factory, today=ctx.today) as repos:
        service = ctx.recommendation_service(repos.profiles, repos.jobs, repos.applications)

        if args.command == 'match-score':
            result = service.match_score(args.seeker, args.job)
        elif args.command == 'recommend-jobs':
            result = service.recommended_jobs_for_seeker(
                args.seeker,
                exclude_applied=not args.include_applied,
                limit=args.limit,
                offset=args.offset,
                min_score=args.min_score,
                stop_event=stop_event,
            )
        elif args.command == 'recommend-candidates':
            result = service.recommended_candidates_for_job(
                args.job,
                limit=args.limit,
                offset=args.offset,
                min_score=args.min_score,
                include_applied_only=args.applied_only,
                stop_event=stop_event,
            )
        else:
            raise ValueError(f"Unknown command {args.command!r}")

        return result.model_dump_json(indent=2)


def main(argv=None) -> int:
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    args = build_parser().parse_args(argv)
    logger.info(f"Running {args.command}")

    try:
        print(run(args))
    except ServiceException as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
