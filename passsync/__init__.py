"""HR digital pass: real-time slot sync and scheduled notifications."""
