from roombook import create_app, db
from roombook.models import Branch, Room

app = create_app()

with app.app_context():
    db.create_all()

    branch = Branch.query.filter_by(name='Headquarters').first()
    if not branch:
        branch = Branch(name='Headquarters', location='Sao Paulo', timezone=app.config['DEFAULT_TIMEZONE'])
        db.session.add(branch)
        db.session.flush()
        print(f"Branch {branch.name} created ({branch.timezone}).")

    # Create Rooms
    rooms_data = [
        {"name": "Sala Alpha", "capacity": 4},
        {"name": "Sala Beta", "capacity": 10},
        {"name": "Auditorium", "capacity": 50},
        {"name": "Focus Room 1", "capacity": 1}
    ]

    for r_data in rooms_data:
        if not Room.query.filter_by(branch_id=branch.id, name=r_data['name']).first():
            room = Room(branch_id=branch.id, name=r_data['name'], capacity=r_data['capacity'])
            db.session.add(room)
            print(f"Room {room.name} created.")

    db.session.commit()
    print("Database seeded successfully.")
