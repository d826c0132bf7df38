from chartdeck.cli import app

app(prog_name="chartdeck")
