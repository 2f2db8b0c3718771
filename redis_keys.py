REDIS_CLIP_KEY = "clip:{code}" # clip code - pasted text, expires via TTL
REDIS_CLIP_PATTERN = "clip:*"

# **Example `clip:{code}` value**
# - plain string holding the pasted offer/answer blob
# - TTL set on write, never refreshed on read
