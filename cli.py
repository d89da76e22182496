# Role: Local developer CLI to run the city pipeline without the web API.
# Useful for deterministic checks and seeing debug logs in the terminal.

from __future__ import annotations

import city_info.config
city_info.config.load_env()

from city_info.core.pipeline import CityInfoPipeline
from city_info.core.synthesizer import SynthesisUnavailableError


def _parse_request(line: str) -> tuple[str, str | None]:
    # "Paris" -> ("Paris", None); "Paris, France" -> ("Paris", "France")
    city, _, country = line.partition(",")
    return city.strip(), (country.strip() or None)


def main() -> None:
    # 1) Create the pipeline once
    # 2) Read "City[, Country]" lines
    # 3) Run the pipeline -> print the six-section profile
    print("City Info CLI")
    print("Enter a city (optionally 'City, Country'). Commands: /exit")
    print("-" * 50)

    pipeline = CityInfoPipeline()

    while True:
        try:
            line = input("\nCity: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue

        if line.lower() in {"/exit", "exit", "quit", "/quit"}:
            print("Bye!")
            return

        city, country = _parse_request(line)
        if not city:
            print("Please enter a city name.")
            continue

        try:
            result = pipeline.run_request(city, country)
        except SynthesisUnavailableError as e:
            print(f"\nCould not build the profile: {e}")
            continue

        print(f"\n{result['city_information']}")


if __name__ == "__main__":
    main()
