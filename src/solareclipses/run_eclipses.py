# run_eclipses.py
"""
Example usage of the solar eclipse predictor.
"""

import logging

from solareclipses import (
    TimeContext,
    predict_solar_eclipses,
    besselian_solar_with_delta,
    besselian_central_line,
)

# Configure logging for verbose output
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Prediction period
start_year = 2017.0
end_year = 2020.0

# Step of the forward differences (days)
delta_days = 5.0 / 1440.0


def main():
    context = TimeContext()

    print("\n" + "=" * 80)
    print("SOLAR ECLIPSES")
    print("=" * 80 + "\n")

    eclipses = predict_solar_eclipses(start_year, end_year, context=context)

    print(f"{'New moon (UTC)':<22} {'Maximum (UTC)':<22} {'Type':<8} {'Sigma':>8}")
    print("-" * 64)
    for eclipse in eclipses:
        print(
            f"{eclipse.new_moon_time.iso:<22} {eclipse.max_time.iso:<22} "
            f"{eclipse.eclipse_type.value:<8} {eclipse.sigma:>8.4f}"
        )

    print(f"\n{'='*80}")
    print("BESSELIAN ELEMENTS AT MAXIMUM")
    print("=" * 80)

    for eclipse in eclipses:
        bessel = besselian_solar_with_delta(
            context, eclipse, eclipse.max_time, delta_days
        )
        point = besselian_central_line(eclipse, bessel)

        print(f"\n{eclipse.eclipse_type.value} eclipse, maximum {eclipse.max_time.iso}")
        print(f"  a  = {bessel.a:10.5f}°   d  = {bessel.d:10.5f}°   mu = {bessel.mu:10.5f}°")
        print(f"  x  = {bessel.x:10.6f}    y  = {bessel.y:10.6f}")
        print(f"  x' = {bessel.x_dot:10.6f}/d  y' = {bessel.y_dot:10.6f}/d")
        print(f"  l1 = {bessel.l1:10.6f}    l2 = {bessel.l2:10.6f}")
        if point.intersects_earth:
            print(f"  Central line: xi={point.xi:.5f} eta={point.eta:.5f} zeta={point.zeta:.5f}")
        else:
            print("  Shadow axis misses the Earth")


if __name__ == "__main__":
    main()
