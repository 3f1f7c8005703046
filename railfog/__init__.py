"""Railfog - 안개 속 열차 탐험 시뮬레이션 코어"""

__version__ = "0.1.0"
