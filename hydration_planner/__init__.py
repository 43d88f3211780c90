"""喝水记录与提醒：记录饮水、按时提醒、导出记录。"""
__version__ = "0.1.0"
