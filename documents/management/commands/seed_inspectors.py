import logging

from django.core.management.base import BaseCommand, CommandError

from documents.models import Inspector

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Load inspector names used by the assign and hold actions."

    def add_arguments(self, parser):
        parser.add_argument('names', nargs='*', help="Inspector names")
        parser.add_argument('--file', help="Text file with one inspector name per line")
        parser.add_argument('--deactivate-missing', action='store_true',
                            help="Mark inspectors not in the given list as inactive")

    def handle(self, *args, **options):
        names = list(options['names'])
        if options['file']:
            try:
                with open(options['file'], encoding='utf-8') as fh:
                    names.extend(line.strip() for line in fh)
            except OSError as exc:
                raise CommandError(f"Cannot read {options['file']}: {exc}")

        names = sorted({name for name in names if name})
        if not names:
            raise CommandError("No inspector names given.")

        created = 0
        for name in names:
            _, was_created = Inspector.objects.update_or_create(name=name, defaults={'is_active': True})
            created += was_created

        if options['deactivate_missing']:
            deactivated = Inspector.objects.exclude(name__in=names).update(is_active=False)
            self.stdout.write(f"Deactivated {deactivated} inspector(s).")

        logger.info("Seeded %d inspector(s), %d new", len(names), created)
        self.stdout.write(self.style.SUCCESS(f"Loaded {len(names)} inspector(s), {created} new."))
