"""
Minimal MCP server for trying the client locally.

Run the client against it with:

    mcp-openai-client docs/examples/weather_server.py
"""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP("weather")

# Canned data so the example works offline
FORECASTS = {
    "paris": "18C, cloudy",
    "london": "14C, light rain",
    "tokyo": "22C, sunny",
}


@mcp.tool()
def get_weather(city: str) -> str:
    """Get the current weather for a city."""
    forecast = FORECASTS.get(city.strip().lower())
    if forecast is None:
        raise ValueError(f"No weather data for '{city}'.")
    return forecast


@mcp.tool()
def list_cities() -> str:
    """List the cities with weather data."""
    return ", ".join(sorted(name.title() for name in FORECASTS))


if __name__ == "__main__":
    mcp.run()
