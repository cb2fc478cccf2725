class EmailSendError(RuntimeError):
    pass


class NotificationSendError(RuntimeError):
    pass
