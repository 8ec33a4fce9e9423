"""Task rules, view composition, alarms and history."""
