import logging
import logging.config

log_format = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


def setup_logging(default_level="WARNING", info_loggers=None, debug_loggers=None, more_loggers=None):
    config_dict = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': log_format,
            },
        },
        'handlers': {
            'default': {
                'level': 'DEBUG',
                'formatter': 'standard',
                'class': 'logging.StreamHandler',
                'stream': 'ext://sys.stdout',
            },
        },
        'loggers': {
            '': {  # root logger
                'handlers': ['default'],
                'level': default_level,
                'propagate': False
            },
        }
    }
    info_loggers = info_loggers or []
    debug_loggers = debug_loggers or []

    def add_one(logger):
        if logger.name in debug_loggers:
            level = "DEBUG"
        elif logger.name in info_loggers:
            level = "INFO"
        else:
            level = default_level
        config_dict['loggers'][logger.name] = {
            'handlers': ['default'],
            'level': level,
            'propagate': False
        }

    for logger in get_loggers():
        add_one(logger)
    if more_loggers:
        for logger in more_loggers:
            add_one(logger)

    logging.config.dictConfig(config_dict)
    return config_dict


def get_loggers():
    res = []
    res.append(logging.getLogger("SessionAccumulator"))
    res.append(logging.getLogger("SilenceDebounceTimer"))
    res.append(logging.getLogger("ClipPublisher"))
    res.append(logging.getLogger("SessionRecorder"))
    res.append(logging.getLogger("FileBurstDetector"))
    res.append(logging.getLogger("TopErrorHandler"))
    return res
