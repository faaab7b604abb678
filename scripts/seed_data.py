#!/usr/bin/env python3
"""
Demo Data Seeder

Creates the tables if needed and loads demo consultants, vendors,
submissions and interviews. Does nothing if consultants already exist.
Usage: python scripts/seed_data.py
"""
import sys
sys.path.insert(0, '.')

from datetime import datetime

from consultant_tracker.core.auth import hash_password
from consultant_tracker.db.models import Consultant, Interview, Submission, User, Vendor
from consultant_tracker.db.postgres import get_db_session, init_db

CONSULTANTS = [
    {
        "first_name": "John", "last_name": "Smith", "email": "john.smith@email.com",
        "phone": "+1-555-0101", "position": "Senior Java Developer",
        "skills": ["Java", "Spring Boot", "Microservices", "AWS"],
        "experience": "8 years", "location": "New York, NY", "status": "active",
    },
    {
        "first_name": "Sarah", "last_name": "Johnson", "email": "sarah.johnson@email.com",
        "phone": "+1-555-0102", "position": "React Frontend Developer",
        "skills": ["React", "TypeScript", "Node.js", "GraphQL"],
        "experience": "5 years", "location": "San Francisco, CA", "status": "active",
    },
    {
        "first_name": "Michael", "last_name": "Chen", "email": "michael.chen@email.com",
        "phone": "+1-555-0103", "position": "DevOps Engineer",
        "skills": ["Docker", "Kubernetes", "AWS", "Terraform"],
        "experience": "6 years", "location": "Seattle, WA", "status": "placed",
    },
    {
        "first_name": "Emily", "last_name": "Davis", "email": "emily.davis@email.com",
        "phone": "+1-555-0104", "position": "Python Data Scientist",
        "skills": ["Python", "Machine Learning", "TensorFlow", "SQL"],
        "experience": "4 years", "location": "Boston, MA", "status": "active",
    },
]

VENDORS = [
    {
        "name": "TechCorp Solutions", "contact_person": "Robert Wilson",
        "email": "robert.wilson@techcorp.com", "phone": "+1-555-1001", "location": "New York, NY",
        "specialties": ["Java", "Spring Boot", "Microservices"], "status": "active",
        "notes": "Leading technology consulting firm",
    },
    {
        "name": "InnovateTech Inc", "contact_person": "Lisa Anderson",
        "email": "lisa.anderson@innovatetech.com", "phone": "+1-555-1002", "location": "San Francisco, CA",
        "specialties": ["React", "AI", "Machine Learning"], "status": "active",
        "notes": "Startup focused on AI and machine learning",
    },
    {
        "name": "CloudFirst Systems", "contact_person": "David Brown",
        "email": "david.brown@cloudfirst.com", "phone": "+1-555-1003", "location": "Seattle, WA",
        "specialties": ["DevOps", "AWS", "Docker", "Kubernetes"], "status": "active",
        "notes": "Cloud infrastructure and DevOps specialists",
    },
    {
        "name": "DataDriven Analytics", "contact_person": "Jennifer Taylor",
        "email": "jennifer.taylor@datadriven.com", "phone": "+1-555-1004", "location": "Boston, MA",
        "specialties": ["Python", "Data Analytics", "SQL"], "status": "pending",
        "notes": "Data analytics and business intelligence",
    },
]

# (consultant index, vendor index, position, status, submission date, notes)
SUBMISSIONS = [
    (0, 0, "Senior Java Developer", "submitted", datetime(2024, 1, 15), "Great fit for their microservices project"),
    (1, 1, "Frontend React Developer", "under_review", datetime(2024, 1, 18), "Awaiting technical interview feedback"),
    (2, 2, "DevOps Engineer", "interview_scheduled", datetime(2024, 1, 20), "Technical interview scheduled for next week"),
    (3, 3, "Data Scientist", "submitted", datetime(2024, 1, 22), "Resume submitted, pending initial review"),
]


def main():
    init_db()

    with get_db_session() as db:
        if db.query(Consultant).first():
            print("Database already seeded")
            return

        print("Seeding database with demo data...")

        admin = db.query(User).filter(User.role == "admin").first()
        if not admin:
            admin = User(
                email="admin@example.com", first_name="Demo", last_name="Admin", role="admin",
                password_hash=hash_password("change-me-now"), is_password_temporary=True,
            )
            db.add(admin)
            db.flush()
            print(f"    Created admin user {admin.email} (temporary password: change-me-now)")

        consultants = [Consultant(**data, created_by=admin.id) for data in CONSULTANTS]
        for consultant in consultants:
            file_name = f"{consultant.first_name.lower()}-{consultant.last_name.lower()}-resume.pdf"
            consultant.resume_url, consultant.resume_file_name = f"/uploads/{file_name}", file_name
        vendors = [Vendor(**data, recruiter_id=admin.id, created_by=admin.id) for data in VENDORS]
        db.add_all(consultants + vendors)
        db.flush()

        submissions = [
            Submission(
                consultant_id=consultants[c].id, vendor_id=vendors[v].id, position_title=position,
                status=status, submission_date=submitted_at, notes=notes, notes_updated_at=submitted_at,
                created_by=admin.id,
            )
            for c, v, position, status, submitted_at, notes in SUBMISSIONS
        ]
        db.add_all(submissions)
        db.flush()

        db.add_all([
            Interview(
                submission_id=submissions[2].id, interview_date=datetime(2024, 1, 28, 10, 0),
                interview_type="video", round_type="technical", status="scheduled",
                notes="Technical interview focusing on Kubernetes and AWS", created_by=admin.id,
            ),
            Interview(
                submission_id=submissions[1].id, interview_date=datetime(2024, 1, 25, 14, 0),
                interview_type="video", round_type="technical", status="completed",
                notes="Candidate performed well in coding challenge", created_by=admin.id,
            ),
        ])

    print("Database seeded successfully!")


if __name__ == "__main__":
    main()
