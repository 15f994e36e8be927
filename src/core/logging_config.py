import logging
import sys
from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = record.created
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname

        log_record['module'] = record.module
        log_record['lineno'] = record.lineno


def setup_logging(log_level_str: str = "INFO", json_logs: bool = True):
    """
    Configures application logging on the root logger.

    With ``json_logs`` the records are emitted as structured JSON on stdout,
    otherwise the plain ``basicConfig`` style format is used (handy when
    running uvicorn locally).
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Called once at app startup; a second call only adjusts the level.
    if any(getattr(h, "_nurse_ei_handler", False) for h in root_logger.handlers):
        root_logger.info(f"Logging already configured. Current level: {logging.getLevelName(root_logger.getEffectiveLevel())}")
        return

    log_handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(module)s %(lineno)d %(message)s')
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)
    log_handler.setFormatter(formatter)
    log_handler._nurse_ei_handler = True
    root_logger.addHandler(log_handler)
    root_logger.info(f"Logging configured with level: {logging.getLevelName(log_level)} (json={json_logs})")
