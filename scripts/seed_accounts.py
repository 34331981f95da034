import argparse
import csv
import os
import secrets
import string
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from oj.core.logging_config import setup_logging
from oj.db.init_db import init_db, seed_accounts
from oj.db.session import SessionLocal
from oj.schemas.account import AccountCreate, Authority


def generate_secure_password(length=12):
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    while True:
        password = ''.join(secrets.choice(alphabet) for _ in range(length))
        if (any(c.islower() for c in password)
                and any(c.isupper() for c in password)
                and any(c.isdigit() for c in password)
                and any(c in "!@#$%^&*" for c in password)):
            break
    return password


def read_accounts(accounts_file_path: str):
    """Lines are ``handle`` or ``handle,tier``; the tier defaults to a regular user."""
    with open(accounts_file_path, 'r', newline='') as f:
        for row in csv.reader(f):
            if not row or not row[0].strip() or row[0].startswith('#'):
                continue
            handle = row[0].strip()
            auth = int(row[1]) if len(row) > 1 and row[1].strip() else int(Authority.USER)
            yield AccountCreate(account=handle, password=generate_secure_password(), auth=auth)


def main(accounts_file_path: str, output_csv_path: str, create_tables: bool):
    listener = setup_logging()
    db = SessionLocal()

    try:
        if create_tables:
            init_db()

        accounts = {a.account: a for a in read_accounts(accounts_file_path)}
        print(f"Found {len(accounts)} accounts to process.")

        created = seed_accounts(db, accounts.values())
        credentials = [
            {'account': a.account, 'password': accounts[a.account].password, 'auth': a.auth}
            for a in created
        ]

        if credentials:
            with open(output_csv_path, 'w', newline='') as csvfile:
                writer = csv.DictWriter(csvfile, fieldnames=['account', 'password', 'auth'])
                writer.writeheader()
                writer.writerows(credentials)
            print(f"\nSUCCESS: Wrote {len(credentials)} new account credentials to '{output_csv_path}'.")
        else:
            print("\nNo new accounts were created.")

    finally:
        db.close()
        listener.stop()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed accounts (e.g. admin,30 / judger,20) from a list of handles.")
    parser.add_argument("accounts_file", help="Path to a text file with one 'handle[,tier]' per line.")
    parser.add_argument("--output", default="new_account_credentials.csv",
                        help="Path to the output CSV file for credentials (default: new_account_credentials.csv).")
    parser.add_argument("--create-tables", action="store_true",
                        help="Create the schema from the models before seeding.")

    args = parser.parse_args()
    main(args.accounts_file, args.output, args.create_tables)
