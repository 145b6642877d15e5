"""Moodlog: daily mood log, streak insights and affirmation quotes."""
