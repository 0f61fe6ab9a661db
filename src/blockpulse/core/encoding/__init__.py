"""Wire encoders for samples."""

from blockpulse.core.encoding.json_array import encode_samples, sample_to_dict

__all__ = ["encode_samples", "sample_to_dict"]
