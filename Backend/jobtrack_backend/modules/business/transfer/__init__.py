from jobtrack_backend.modules.business.transfer.codec import TransferCodec

__all__ = ['TransferCodec']
