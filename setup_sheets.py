"""
Google Sheets Setup Script

Prepares a spreadsheet for ProTrack:
- One tab per entity (user, client, project, task, activity) plus the
  project type list
- Header row with formatting and frozen header
- Dropdown validation for roles, teams, statuses and priorities
- Optional example data (--seed)

Existing tabs are kept; only missing tabs are created and headers written.
"""

import argparse
import json
import os
from datetime import date, timedelta

from dotenv import load_dotenv
load_dotenv()

import gspread
from google.oauth2.service_account import Credentials

from protrack.integrations.sheets import (
    SHEET_HEADERS,
    SHEET_USERS,
    SHEET_CLIENTS,
    SHEET_PROJECTS,
    SHEET_TASKS,
    SHEET_ACTIVITIES,
    SHEET_PROJECT_TYPES,
)
from protrack.models import ProjectPriority, ProjectStatus, TaskStatus, Team, UserRole, UserStatus

GOOGLE_CREDENTIALS_JSON = os.getenv('GOOGLE_CREDENTIALS_JSON', '')
GOOGLE_SHEET_ID = os.getenv('GOOGLE_SHEET_ID', '')

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
]

# (sheet, header name) -> allowed values
DROPDOWNS = {
    (SHEET_USERS, "role"): [r.value for r in UserRole],
    (SHEET_USERS, "team"): [t.value for t in Team],
    (SHEET_USERS, "status"): [s.value for s in UserStatus],
    (SHEET_PROJECTS, "status"): [s.value for s in ProjectStatus],
    (SHEET_PROJECTS, "priority"): [p.value for p in ProjectPriority],
    (SHEET_TASKS, "status"): [s.value for s in TaskStatus],
}


def rgb(r, g, b):
    """Convert RGB (0-255) to Google Sheets color format."""
    return {'red': r/255, 'green': g/255, 'blue': b/255}


def get_or_create_sheet(spreadsheet, name, rows=1000, cols=20):
    """Return the worksheet, creating it if missing. Returns (worksheet, created)."""
    try:
        return spreadsheet.worksheet(name), False
    except gspread.WorksheetNotFound:
        ws = spreadsheet.add_worksheet(title=name, rows=rows, cols=cols)
        print(f"  Created: {name}")
        return ws, True


def header_requests(sheet_id, width):
    """Bold dark header row, frozen."""
    return [
        {
            'repeatCell': {
                'range': {'sheetId': sheet_id, 'startRowIndex': 0, 'endRowIndex': 1, 'startColumnIndex': 0, 'endColumnIndex': width},
                'cell': {
                    'userEnteredFormat': {
                        'backgroundColor': rgb(26, 26, 51),
                        'textFormat': {'bold': True, 'foregroundColor': rgb(255, 255, 255), 'fontSize': 10},
                        'horizontalAlignment': 'CENTER',
                    }
                },
                'fields': 'userEnteredFormat'
            }
        },
        {
            'updateSheetProperties': {
                'properties': {'sheetId': sheet_id, 'gridProperties': {'frozenRowCount': 1}},
                'fields': 'gridProperties.frozenRowCount'
            }
        },
    ]


def dropdown_request(sheet_id, column, values):
    return {
        'setDataValidation': {
            'range': {'sheetId': sheet_id, 'startRowIndex': 1, 'endRowIndex': 1000, 'startColumnIndex': column, 'endColumnIndex': column + 1},
            'rule': {'condition': {'type': 'ONE_OF_LIST', 'values': [{'userEnteredValue': v} for v in values]}, 'showCustomUi': True, 'strict': True}
        }
    }


def example_rows():
    """A small consistent data set: two users, one client, one project with two tasks and one activity."""
    today = date.today()
    return {
        SHEET_USERS: [
            ["USER-001", "admin", "Alice Admin", "alice@example.com", "", "Admin", "Team 1", "Active"],
            ["USER-002", "bob", "Bob Builder", "bob@example.com", "", "Associate", "Team 1", "Active"],
        ],
        SHEET_CLIENTS: [
            ["CLIENT-001", "Acme", "1 Main Street"],
        ],
        SHEET_PROJECTS: [
            ["PROJ-001", "Website Redesign", "New marketing site", "CLIENT-001", "USER-001", "USER-002",
             today.isoformat(), (today + timedelta(days=30)).isoformat(), "In Progress", "High", "Web", ""],
        ],
        SHEET_TASKS: [
            ["TASK-0001", "Wireframes", "Landing and pricing pages", "PROJ-001", "USER-002", "Done"],
            ["TASK-0002", "Build pages", "", "PROJ-001", "USER-002", "In Progress"],
        ],
        SHEET_ACTIVITIES: [
            ["ACT-0001", "Drew landing page", "TASK-0001", "PROJ-001", "USER-002", today.isoformat(), "09:00", "11:30"],
        ],
        SHEET_PROJECT_TYPES: [
            ["TYPE-001", "Web"],
            ["TYPE-002", "Mobile"],
        ],
    }


def setup_sheets(spreadsheet, seed=False):
    """Create missing tabs, write headers and validation, optionally seed."""
    print("\n" + "="*50)
    print("Preparing ProTrack sheets")
    print("="*50)

    requests = []
    examples = example_rows() if seed else {}

    for name, headers in SHEET_HEADERS.items():
        ws, created = get_or_create_sheet(spreadsheet, name, cols=max(len(headers), 10))
        ws.update(values=[headers], range_name='A1')
        requests.extend(header_requests(ws.id, len(headers)))

        for (sheet, column_name), values in DROPDOWNS.items():
            if sheet == name:
                requests.append(dropdown_request(ws.id, headers.index(column_name), values))

        rows = examples.get(name)
        if rows:
            if created or len(ws.get_all_values()) <= 1:
                ws.append_rows(rows, value_input_option="USER_ENTERED")
                print(f"  Seeded {len(rows)} rows into {name}")
            else:
                print(f"  Skipped seeding {name}: sheet already has data")

    spreadsheet.batch_update({'requests': requests})
    print(f"  Applied {len(requests)} formatting requests")


def main():
    parser = argparse.ArgumentParser(description="Prepare a Google Sheet for ProTrack")
    parser.add_argument("--seed", action="store_true", help="add example rows to empty sheets")
    args = parser.parse_args()

    print("\n" + "="*60)
    print("  PROTRACK - Google Sheets Setup")
    print("="*60)

    print(f"\n[*] Sheet ID: {GOOGLE_SHEET_ID[:20]}..." if GOOGLE_SHEET_ID else "\n[X] Sheet ID: NOT SET")
    print(f"[*] Credentials: {'SET' if GOOGLE_CREDENTIALS_JSON else 'NOT SET'}")

    if not GOOGLE_SHEET_ID or not GOOGLE_CREDENTIALS_JSON:
        print("\n[X] ERROR: Missing configuration. Check .env file.")
        return

    print("\n[*] Connecting to Google Sheets...")
    try:
        creds_data = json.loads(GOOGLE_CREDENTIALS_JSON)
        credentials = Credentials.from_service_account_info(creds_data, scopes=SCOPES)
        client = gspread.authorize(credentials)
        spreadsheet = client.open_by_key(GOOGLE_SHEET_ID)
        print(f"[OK] Connected to: {spreadsheet.title}")
    except Exception as e:
        print(f"\n[X] ERROR: {e}")
        return

    try:
        setup_sheets(spreadsheet, seed=args.seed)
    except Exception as e:
        print(f"\n[X] ERROR: {e}")
        import traceback
        traceback.print_exc()
        return

    print("\n" + "="*60)
    print("  [OK] SUCCESS! Sheets are ready.")
    print("="*60)
    print(f"  https://docs.google.com/spreadsheets/d/{GOOGLE_SHEET_ID}")
    print()


if __name__ == "__main__":
    main()
