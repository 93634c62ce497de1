"""HTTP surface over the activity, goal and analytics services."""
