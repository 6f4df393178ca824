"""Create all tables for a fresh deployment without running migrations."""

from wordcloud_stage.db.session import create_tables

if __name__ == "__main__":
    create_tables()
    print("Database initialized.")
