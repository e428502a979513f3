# scripts/book_meeting.py
import sys

import requests


def main():
    event_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1

    payload = {
        "event_id": event_id,
        "guest_name": "Script Guest",
        "guest_email": "guest@example.com",
        "additional_info": "Booked from scripts/book_meeting.py",
        "start_time": "2030-01-01T10:00:00",
        "end_time": "2030-01-01T10:30:00",
        "timezone": "America/Bogota",
    }

    resp = requests.post("http://127.0.0.1:8000/meetings/public/book", json=payload)
    print("Status:", resp.status_code)
    print(resp.json())

if __name__ == "__main__":
    main()
