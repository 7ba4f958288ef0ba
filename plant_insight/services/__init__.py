"""Services backing the plant analysis endpoint.

- images: data URI helpers for uploaded photos
- prompts: system/user prompt assembly
- gateway: AI gateway chat-completion client
- interpreter: tolerant JSON extraction and yield derivation
- analysis: per-request pipeline tying the above together
"""
