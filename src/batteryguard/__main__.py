from batteryguard.cli import app

app(prog_name="batteryguard")
