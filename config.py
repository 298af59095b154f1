import os


class Config:
    PORT = int(os.environ.get('PORT', '7860'))
    # Simulation rate of the headless session thread (frames per second)
    HEADLESS_FPS = int(os.environ.get('POINTS_HEADLESS_FPS', '30'))
    # Browser refresh interval (seconds)
    REFRESH_INTERVAL = float(os.environ.get('POINTS_REFRESH_INTERVAL', '0.2'))
    # Initial contents of the "Points" field
    DEFAULT_COUNT = os.environ.get('POINTS_DEFAULT_COUNT', '5')
    LOG_LEVEL = os.environ.get('POINTS_LOG_LEVEL', 'INFO').upper()
