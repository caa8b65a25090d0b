from django.core.management.base import BaseCommand, CommandError

from labintake.exceptions import BlockError
from labintake.services import get_webhook_log
from labintake.tasks import replay_webhook_log


class Command(BaseCommand):
    help = 'Re-run the intake pipeline against a stored webhook payload.'

    def add_arguments(self, parser):
        parser.add_argument('log_id', type=int)
        parser.add_argument('--sync', action='store_true', help='Run in-process instead of queueing on Celery.')

    def handle(self, *args, **options):
        log_id = options['log_id']
        try:
            get_webhook_log(log_id)
        except BlockError as exc:
            raise CommandError(exc.message)

        if options['sync']:
            outcome = replay_webhook_log.apply(args=[log_id]).get()
            self.stdout.write(f"Replay of log {log_id}: {outcome}")
        else:
            task = replay_webhook_log.delay(log_id)
            self.stdout.write(f"Replay of log {log_id} queued: task_id={task.id}")
