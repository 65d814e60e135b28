from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser
from django.db import transaction
from django.utils import timezone

from campus_events.audit.models import AuditLog
from campus_events.events.models import Event
from campus_events.registrations import services as registration_services
from campus_events.registrations.models import Registration

ADMIN = {
    "name": "Admin User",
    "email": "admin@college.edu",
    "password": "admin123",  # noqa: S106
    "department": "Administration",
}
STUDENT_PASSWORD = "student123"  # noqa: S105
STUDENTS = [
    {
        "name": "John Doe",
        "email": "john.doe@college.edu",
        "student_id": "20BCS001",
        "department": "Computer Science & Engineering",
        "year": 3,
        "phone": "+91-9876543210",
    },
    {
        "name": "Jane Smith",
        "email": "jane.smith@college.edu",
        "student_id": "20BEC002",
        "department": "Electronics & Communication Engineering",
        "year": 3,
        "phone": "+91-9876543211",
    },
    {
        "name": "Rajesh Kumar",
        "email": "rajesh.kumar@college.edu",
        "student_id": "20BME003",
        "department": "Mechanical Engineering",
        "year": 2,
        "phone": "+91-9876543212",
    },
    {
        "name": "Priya Sharma",
        "email": "priya.sharma@college.edu",
        "student_id": "20BCE004",
        "department": "Civil Engineering",
        "year": 4,
        "phone": "+91-9876543213",
    },
]

# (title, category, venue, capacity, starts in days, lasts hours,
#  deadline days before start, fee, registration fields)
EVENTS = [
    (
        "Technical Symposium",
        Event.Category.TECHNICAL,
        "Main Auditorium",
        500,
        7,
        8,
        2,
        Decimal(0),
        [
            {
                "name": "branch",
                "type": "select",
                "required": True,
                "options": ["CSE", "ECE", "ME", "CE"],
            },
        ],
    ),
    (
        "Cultural Night",
        Event.Category.CULTURAL,
        "Open Air Theatre",
        1000,
        10,
        6,
        2,
        Decimal(0),
        [],
    ),
    (
        "Sports Meet",
        Event.Category.SPORTS,
        "Sports Complex",
        300,
        15,
        48,
        3,
        Decimal(100),
        [
            {
                "name": "sport",
                "type": "select",
                "required": True,
                "options": ["Cricket", "Football", "Basketball", "Volleyball"],
            },
        ],
    ),
    (
        "Hackathon - CodeCrush",
        Event.Category.TECHNICAL,
        "Computer Center",
        100,
        20,
        48,
        2,
        Decimal(200),
        [
            {"name": "team_name", "type": "text", "required": True},
            {"name": "team_size", "type": "number", "required": True},
        ],
    ),
]


class Command(BaseCommand):
    help = "Seed an admin, sample students and sample events"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing users, events, registrations and audit rows first",
        )

    @transaction.atomic
    def handle(self, *args, **options) -> None:
        user_model = get_user_model()
        if options["flush"]:
            self.stdout.write("Clearing existing data...")
            Registration.objects.all().delete()
            Event.objects.all().delete()
            AuditLog.objects.all().delete()
            user_model.objects.all().delete()

        admin = user_model.objects.filter(email=ADMIN["email"]).first()
        if admin is None:
            admin = user_model.objects.create_user(
                role=user_model.Role.ADMIN,
                is_verified=True,
                **ADMIN,
            )
        self.stdout.write(f"Admin: {admin.email}")

        students = []
        for row in STUDENTS:
            student = user_model.objects.filter(email=row["email"]).first()
            if student is None:
                student = user_model.objects.create_user(
                    password=STUDENT_PASSWORD,
                    is_verified=True,
                    **row,
                )
            students.append(student)
        self.stdout.write(f"Students: {len(students)}")

        now = timezone.now()
        events = []
        for (
            title,
            category,
            venue,
            capacity,
            starts_in,
            hours,
            deadline_before,
            fee,
            fields,
        ) in EVENTS:
            event = Event.objects.filter(title=title).first()
            if event is None:
                start_at = now + timedelta(days=starts_in)
                event = Event.objects.create(
                    title=title,
                    description=f"{title} for all students of the college.",
                    short_description=title,
                    category=category,
                    organizer=admin,
                    organizer_name=admin.name,
                    organizer_email=admin.email,
                    organizer_department=admin.department,
                    venue_name=venue,
                    venue_address="College Campus",
                    venue_capacity=capacity,
                    start_at=start_at,
                    end_at=start_at + timedelta(hours=hours),
                    registration_deadline=start_at - timedelta(days=deadline_before),
                    max_participants=capacity,
                    fee=fee,
                    registration_fields=fields,
                    target_audience=["all"],
                )
            events.append(event)
        self.stdout.write(f"Events: {len(events)}")

        cultural_night = events[1]
        for student in students[:2]:
            if not Registration.objects.filter(user=student, event=cultural_night).exists():
                registration_services.register_for_event(
                    student,
                    cultural_night.pk,
                    {},
                    metadata={"source": Registration.Source.ADMIN},
                )

        self.stdout.write(self.style.SUCCESS("Seed data loaded"))
