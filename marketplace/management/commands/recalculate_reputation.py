# Recalculate Reputation Management Command
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Avg, Count, Q

from marketplace.models import Review, Trade, User


class Command(BaseCommand):
    help = 'Recalculates reputation scores and completed trade counts to ensure data consistency.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Run the command without saving changes to the database.',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=1000,
            help='Batch size for bulk processing.',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        batch_size = options['batch_size']

        if batch_size < 1:
            raise CommandError('--batch-size must be a positive integer.')

        self.recalculate_users(dry_run, batch_size)

        if dry_run:
            self.stdout.write(self.style.SUCCESS('Dry run completed. No changes saved.'))
        else:
            self.stdout.write(self.style.SUCCESS('Recalculation completed successfully.'))

    def recalculate_users(self, dry_run, batch_size):
        self.stdout.write('Recalculating user reputation...')
        users = User.objects.all().order_by('pk').iterator(chunk_size=batch_size)
        updates = []
        count = 0
        changed = 0

        for user in users:
            raw_avg = Review.objects.filter(reviewee=user).aggregate(avg=Avg('rating'))['avg']
            # Users without reviews keep their current score
            new_score = user.reputation_score if raw_avg is None else round(float(raw_avg), 2)

            new_total = Trade.objects.filter(
                Q(sender=user) | Q(receiver=user),
                status=Trade.COMPLETED
            ).aggregate(total=Count('id'))['total']

            if abs(user.reputation_score - new_score) > 0.001 or user.total_trades != new_total:
                if dry_run:
                    self.stdout.write(
                        f'  [DRY-RUN] User {user.id} ({user.email}): '
                        f'Reputation {user.reputation_score} -> {new_score}, '
                        f'Trades {user.total_trades} -> {new_total}'
                    )
                user.reputation_score = new_score
                user.total_trades = new_total
                updates.append(user)
                changed += 1

            if len(updates) >= batch_size:
                if not dry_run:
                    User.objects.bulk_update(updates, ['reputation_score', 'total_trades'])
                updates = []

            count += 1
            if count % 100 == 0:
                self.stdout.write(f'Processed {count} users...')

        if updates and not dry_run:
            User.objects.bulk_update(updates, ['reputation_score', 'total_trades'])

        self.stdout.write(f'Processed {count} users total, {changed} out of date.')
