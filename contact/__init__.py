"""
Contact Form App

Handles public contact form submissions:
- Per-IP rate limiting
- reCAPTCHA v3 bot verification (fails open)
- Validation and sanitization of the submitted fields
- Storage of each accepted submission
- Email notifications (staff alert and submitter confirmation)
- A Python form client mirroring the browser form's behaviour
"""
