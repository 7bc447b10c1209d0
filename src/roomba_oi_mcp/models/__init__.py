"""Data models for sensor readings."""

from .sensors import BumpsAndWheelDrops, SensorReading
