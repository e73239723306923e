"""
Demo Data Generator for TidyTap
Run this script to populate your development database with a few households,
their helpers, the default templates and a spread of tasks.

Usage:
    python seed_demo_data.py
"""

import random
import uuid
from datetime import timedelta
from faker import Faker
from sqlalchemy.orm import Session

from app.database import SessionLocal, init_db
from app.models import (
    User,
    Household,
    HouseholdMembership,
    Task,
    TaskTemplate,
    ShrimpySuggestion,
)
from app.models.enums import Priority
from app.schemas.task import TaskCreate, parse_repeat_rule
from app.services.household_service import HouseholdService
from app.services.task_service import TaskService
from app.services.template_service import TemplateService
from app.utils.date_helpers import DateHelpers

# Initialize Faker
fake = Faker()

CHORES = [
    ("Vacuum the hallway", "Cleaning"),
    ("Water the plants", "Garden"),
    ("Take out recycling", "Kitchen"),
    ("Wipe kitchen counters", "Kitchen"),
    ("Change bed sheets", "Bedroom"),
    ("Clean bathroom mirror", "Bathroom"),
    ("Mop the floors", "Cleaning"),
    ("Fold laundry", "Laundry"),
]

REPEATS = [
    None,
    "daily",
    {"frequency": "weekly", "days": ["monday", "thursday"]},
    {"frequency": "monthly", "day_of_month": 1},
]


class DemoDataGenerator:
    def __init__(self, db: Session):
        self.db = db
        self.households = HouseholdService(db)
        self.tasks = TaskService(db)
        self.templates = TemplateService(db)
        self.managers = []
        self.helpers = []

    def clear_existing_data(self):
        """Clear existing data (use with caution!)"""
        print("🗑️  Clearing existing data...")

        # Delete in reverse dependency order
        self.db.query(ShrimpySuggestion).delete()
        self.db.query(Task).delete()
        self.db.query(TaskTemplate).delete()
        self.db.query(HouseholdMembership).delete()
        self.db.query(Household).delete()
        self.db.query(User).delete()

        self.db.commit()
        print("✅ Existing data cleared")

    def create_households(self, count=2):
        """Create managers, each with their own household"""
        print(f"🏠 Creating {count} households...")

        for _ in range(count):
            manager_id = str(uuid.uuid4())
            name = fake.name()
            result = self.households.create_household(
                manager_id=manager_id, manager_name=name, email=fake.unique.email()
            )
            if not result.success:
                raise RuntimeError(f"Household creation failed: {result.details}")
            self.managers.append((manager_id, result.data))
            print(f"✅ {name}: invite code {result.data['invite_code']}")

    def create_helpers(self, per_household=3):
        """Join helpers by invite code; one helper joins every household"""
        print("🔗 Joining helpers...")

        shared_id, shared_name, shared_email = (
            str(uuid.uuid4()),
            fake.name(),
            fake.unique.email(),
        )
        for _, household in self.managers:
            for _ in range(per_household):
                helper_id = str(uuid.uuid4())
                result = self.households.join_household(
                    code=household["invite_code"],
                    user_id=helper_id,
                    email=fake.unique.email(),
                    name=fake.name(),
                )
                if result.success:
                    self.helpers.append((helper_id, household["household_id"]))

            self.households.join_household(
                code=household["invite_code"],
                user_id=shared_id,
                email=shared_email,
                name=shared_name,
            )
            self.helpers.append((shared_id, household["household_id"]))

        print(f"✅ {len(self.helpers)} helper memberships")

    def create_templates_and_tasks(self, count_per_household=8):
        print(f"🧽 Creating {count_per_household} tasks per household...")

        for manager_id, household in self.managers:
            household_id = household["household_id"]
            self.templates.initialize_defaults(household_id, manager_id)

            members = [h for h, hid in self.helpers if hid == household_id]
            for _ in range(count_per_household):
                title, category = random.choice(CHORES)
                repeat = parse_repeat_rule(random.choice(REPEATS))
                task = self.tasks.create_task(
                    TaskCreate(
                        title=title,
                        description=fake.sentence(),
                        priority=random.choice(list(Priority)),
                        category=category,
                        assigned_to=random.sample(members, k=min(2, len(members))),
                        due_time=DateHelpers.utcnow()
                        + timedelta(days=random.randint(-5, 14)),
                        repeat=repeat,
                    ),
                    household_id=household_id,
                    created_by=manager_id,
                )
                if random.random() < 0.3:
                    self.tasks.set_completed(task.id, task.assignee_ids[0], True)

            template = self.templates.list_templates(household_id)[0]
            self.templates.instantiate_template(
                template.id, household_id, manager_id, members[:1]
            )

    def generate_all_data(self, clear_existing=False):
        if clear_existing:
            self.clear_existing_data()

        self.create_households()
        self.create_helpers()
        self.create_templates_and_tasks()

        print("\n🎉 Demo data generation complete!")
        print(f"   - Households: {len(self.managers)}")
        print(f"   - Helper memberships: {len(self.helpers)}")


def main():
    """Main function to run the demo data generator"""
    print("🦐 TidyTap Demo Data Generator")
    print("=" * 40)

    init_db()
    db = SessionLocal()

    try:
        generator = DemoDataGenerator(db)

        clear_existing = input("Clear existing data? (y/N): ").lower().startswith("y")
        generator.generate_all_data(clear_existing=clear_existing)

    except Exception as e:
        print(f"\n❌ Error generating demo data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
