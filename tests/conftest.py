import matplotlib

# Headless backend; must run before pyplot is imported anywhere.
matplotlib.use("Agg")
