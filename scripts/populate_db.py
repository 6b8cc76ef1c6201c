import os
import sys
import django
import random
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from faker import Faker

# Add project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set up Django environment
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campus_trade.settings')
django.setup()

from marketplace import trades
from marketplace.exceptions import Conflict
from marketplace.models import (
    User, University, Item, Message, Review, Report
)

fake = Faker()

def create_universities(num_universities=3):
    print(f"Creating {num_universities} universities...")
    universities = []

    for _ in range(num_universities):
        slug = fake.unique.domain_word()
        university = University.objects.create(
            name=f"{fake.last_name()} University",
            domain=f"{slug}.edu",
            location=fake.city()
        )
        universities.append(university)

    print(f"Created {len(universities)} universities.")
    return universities

def create_users(universities, users_per_university=8):
    print(f"Creating {users_per_university} students per university...")
    users = []

    for university in universities:
        for _ in range(users_per_university):
            email = f"{fake.unique.user_name()}@{university.domain}"
            user = User.objects.create_credentials_user(
                email=email,
                password='password123',
                name=fake.name(),
                university=university,
                major=random.choice(['Physics', 'History', 'Biology', 'Economics', 'Computer Science']),
                graduation_year=timezone.now().year + random.randint(0, 4),
                dorm_location=f"{fake.last_name()} Hall {random.randint(100, 499)}"
            )
            users.append(user)

    # One moderator for the reports queue
    User.objects.create_credentials_user(
        email='moderator@campustrade.local',
        password='password123',
        name='Moderator',
        university=None,
        is_staff=True
    )

    print(f"Created {len(users)} students and 1 moderator.")
    return users

def create_items(users):
    print("Creating items...")
    items = []

    titles = {
        'TEXTBOOKS': ["Calculus textbook", "Organic Chemistry", "Intro to Economics"],
        'ELECTRONICS': ["Monitor", "Graphing calculator", "Headphones"],
        'FURNITURE': ["Desk chair", "Bookshelf", "Bean bag"],
        'KITCHEN': ["Kettle", "Rice cooker", "Mini fridge"],
        'DECOR': ["Desk lamp", "Poster set", "Rug"],
    }
    conditions = [value for value, _ in Item.CONDITION_CHOICES]

    for user in users:
        # Each user lists 1-3 items
        for _ in range(random.randint(1, 3)):
            category = random.choice(list(titles))
            item = Item.objects.create(
                owner=user,
                university=user.university,
                title=random.choice(titles[category]),
                description=fake.paragraph(),
                category=category,
                condition=random.choice(conditions),
                image_urls=[fake.image_url() for _ in range(random.randint(0, 3))],
                estimated_value=Decimal(random.uniform(5.0, 150.0)).quantize(Decimal('0.01')),
                location=fake.street_name(),
                looking_for=random.choice(['', 'Anything useful', 'Kitchen stuff', 'Textbooks'])
            )
            items.append(item)

    print(f"Created {len(items)} items.")
    return items

def create_trades(users, items):
    print("Creating trades...")
    created = []

    by_owner = {}
    for item in items:
        by_owner.setdefault(item.owner_id, []).append(item)

    for sender in users:
        classmates = [u for u in users if u.university_id == sender.university_id and u.pk != sender.pk]
        receiver = random.choice(classmates)

        offered = [i for i in by_owner.get(sender.pk, []) if i.status == Item.AVAILABLE][:1]
        wanted = [i for i in by_owner.get(receiver.pk, []) if i.status == Item.AVAILABLE][:1]
        if not offered and not wanted:
            continue

        trade = trades.propose_trade(
            sender=sender,
            receiver_id=receiver.pk,
            sender_item_ids=[i.pk for i in offered],
            receiver_item_ids=[i.pk for i in wanted],
            message=fake.sentence(),
            meeting_location=fake.street_name(),
            meeting_time=timezone.now() + timedelta(days=random.randint(1, 14))
        )

        outcome = random.choice(['pending', 'accepted', 'declined', 'completed', 'completed', 'cancelled'])
        try:
            if outcome == 'declined':
                trade = trades.decline_trade(receiver, trade.pk)
            elif outcome == 'cancelled':
                trade = trades.cancel_trade(sender, trade.pk)
            elif outcome in ('accepted', 'completed'):
                trade = trades.accept_trade(receiver, trade.pk)
                if outcome == 'completed':
                    trades.confirm_trade(receiver, trade.pk)
                    trade = trades.confirm_trade(sender, trade.pk)
        except Conflict as e:
            # An item may already be reserved by an earlier trade
            print(f"  Skipped trade {trade.pk}: {e.detail}")

        for item in offered + wanted:
            item.refresh_from_db(fields=['status'])

        created.append(trade)

    print(f"Created {len(created)} trades.")
    return created

def create_reviews(trade_list):
    print("Creating reviews...")
    reviews = []

    for trade in trade_list:
        if trade.status != 'COMPLETED':
            continue
        for reviewer, reviewee in ((trade.sender, trade.receiver), (trade.receiver, trade.sender)):
            # 70% chance of leaving a review
            if random.random() < 0.7:
                review = Review.objects.create(
                    trade=trade,
                    reviewer=reviewer,
                    reviewee=reviewee,
                    rating=random.randint(3, 5),
                    comment=fake.sentence()
                )
                reviews.append(review)

    print(f"Created {len(reviews)} reviews.")
    return reviews

def create_messages(users, items):
    print("Creating messages...")
    messages = []

    for item in random.sample(items, min(len(items), 15)):
        sender = random.choice([u for u in users if u.pk != item.owner_id])
        message = Message.objects.create(
            sender=sender,
            receiver=item.owner,
            item=item,
            content=f"Hi! Is the {item.title.lower()} still available?"
        )
        messages.append(message)

    print(f"Created {len(messages)} messages.")
    return messages

def create_reports(users, items):
    print("Creating reports...")
    reports = []

    for _ in range(3):
        reporter = random.choice(users)
        item = random.choice([i for i in items if i.owner_id != reporter.pk])
        report = Report.objects.create(
            reporter=reporter,
            item=item,
            reason=random.choice(['SPAM', 'SCAM', 'INAPPROPRIATE']),
            description=fake.sentence()
        )
        reports.append(report)

    print(f"Created {len(reports)} reports.")
    return reports

def main():
    print("Starting database population...")

    universities = create_universities(num_universities=3)
    users = create_users(universities, users_per_university=8)
    items = create_items(users)
    trade_list = create_trades(users, items)
    create_reviews(trade_list)
    create_messages(users, items)
    create_reports(users, items)

    print("Database population completed successfully!")

if __name__ == '__main__':
    main()
