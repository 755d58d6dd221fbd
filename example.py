#!/usr/bin/env python3
"""
Example script for csq_reader

Reads a .csq recording frame by frame, prints per-frame statistics,
writes colorized frames from a background thread and finally plots the
first frame with its temperature histogram.

Usage:
    python example.py

Make sure to replace "FLIR0116.csq" with your actual CSQ file path.
"""

import logging

import matplotlib.pyplot as plt

from csq_reader import read_csq
from csq_reader.export import FrameExporter


def main():
    """Basic example showing frame reading, export and visualization."""

    logging.basicConfig(format="%(asctime)s %(levelname)s: %(message)s", level=logging.INFO)

    print("🔍 CSQ Reader - Basic Example")
    print("=" * 50)

    # Replace with your actual CSQ file path
    csq_file = "FLIR0116.csq"

    try:
        print(f"📁 Loading: {csq_file}")
        first = None
        with read_csq(csq_file) as reader, FrameExporter("frames", fmt="png") as exporter:
            for frame in reader.frames(skip_errors=True):
                t_min, t_max = frame.get_temperature_range()
                print(f"  Frame {frame.index}: {t_min:.1f}°C - {t_max:.1f}°C")
                exporter.submit(frame)
                if first is None:
                    first = frame

        if first is None:
            print("❌ No frames found!")
            return

        cal = first.calibration
        thermal_data = first.temperature_data
        print(f"\n📊 BASIC INFO:")
        print(f"  Camera: {cal.camera_model} (Serial: {cal.get('CameraSerialNumber')})")
        print(f"  Size: {first.get_image_shape()}")
        print(f"  Frames written: {len(exporter.written)}")

        print(f"\n⚙️ SETTINGS:")
        print(f"  Emissivity: {cal.emissivity}")
        print(f"  Reflected: {cal.reflected_temperature:.1f}°C")
        print(f"  Distance: {cal.object_distance:.1f}m")

        print(f"\n🖼️ DISPLAYING FIRST FRAME...")
        plt.figure(figsize=(12, 5))

        plt.subplot(1, 2, 1)
        plt.imshow(thermal_data, cmap='rainbow')
        plt.colorbar(label='Temperature (°C)')
        plt.title(f'Frame 0 - {cal.camera_model}')

        plt.subplot(1, 2, 2)
        plt.hist(thermal_data.flatten(), bins=50, alpha=0.7, color='red', edgecolor='black')
        plt.title('Temperature Distribution')
        plt.xlabel('Temperature (°C)')
        plt.ylabel('Pixel Count')
        plt.grid(True, alpha=0.3)

        plt.tight_layout()
        plt.show()

        print("✅ Example completed successfully!")

    except FileNotFoundError:
        print(f"❌ Error: File '{csq_file}' not found!")
        print("Please replace 'FLIR0116.csq' with your actual CSQ file path.")
    except Exception as e:
        print(f"❌ Error: {e}")

if __name__ == "__main__":
    main()
