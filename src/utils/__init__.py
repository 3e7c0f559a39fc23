"""Small helpers shared by infrastructure code."""
