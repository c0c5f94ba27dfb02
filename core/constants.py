JOB_STATUS_CHOICES = (
    ('open', 'Open'),              # Job is available for applications
    ('in_progress', 'In Progress'), # Workers have been accepted and are on site
    ('completed', 'Completed'),     # Work is done, billing may still be open
    ('closed', 'Closed'),          # Fully settled
    ('cancelled', 'Cancelled'),    # Job was cancelled
)

JOB_APPLICATION_STATUS_CHOICES = (
    ('pending', 'Pending'),      # Worker applied, awaiting venue response
    ('accepted', 'Accepted'),    # Venue accepted the worker; job is a clock-in target
    ('rejected', 'Rejected'),    # Venue rejected the worker
)

SHIFT_OPEN = 'open'
SHIFT_SUBMITTED = 'submitted'
SHIFT_APPROVED = 'approved'
SHIFT_DISPUTED = 'disputed'
SHIFT_VOID = 'void'

SHIFT_STATUS_CHOICES = (
    (SHIFT_OPEN, 'Open'),            # Worker is on the clock
    (SHIFT_SUBMITTED, 'Submitted'),  # Clocked out, awaiting venue decision
    (SHIFT_APPROVED, 'Approved'),    # Billable
    (SHIFT_DISPUTED, 'Disputed'),
    (SHIFT_VOID, 'Void'),
)

# Adjudication outcomes a venue may record against a submitted shift.
SHIFT_ADJUDICATION_STATUSES = (SHIFT_APPROVED, SHIFT_DISPUTED, SHIFT_VOID)

SHIFT_TRANSITIONS = {
    SHIFT_OPEN: (SHIFT_SUBMITTED,),
    SHIFT_SUBMITTED: SHIFT_ADJUDICATION_STATUSES,
    SHIFT_APPROVED: (),
    SHIFT_DISPUTED: (),
    SHIFT_VOID: (),
}

CLOCK_METHOD_CHOICES = (
    ('manual', 'Manual'),
    ('qr', 'QR Code'),
)

INVOICE_PENDING = 'pending'
INVOICE_PROCESSING = 'processing'
INVOICE_PAID = 'paid'

INVOICE_STATUS_CHOICES = (
    (INVOICE_PENDING, 'Pending'),
    (INVOICE_PROCESSING, 'Processing'),  # External payment initiated
    (INVOICE_PAID, 'Paid'),
)

INVOICE_TRANSITIONS = {
    INVOICE_PENDING: (INVOICE_PROCESSING, INVOICE_PAID),
    INVOICE_PROCESSING: (INVOICE_PAID,),
    INVOICE_PAID: (),
}

PAYMENT_TYPE_CHOICES = (
    ('hourly', 'Hourly'),
    ('fixed', 'Fixed'),
)

REVIEW_RECIPIENT_TYPE_CHOICES = (
    ('worker', 'Worker'),
    ('venue', 'Venue'),
)

MANUAL_INVOICE_POLICIES = ('open', 'engaged', 'disabled')

NOTIFICATION_TYPE_CHOICES = (
    ('shift_approved', 'Shift approved'),
    ('shift_disputed', 'Shift disputed'),
    ('shift_void', 'Shift voided'),
    ('invoice_submitted', 'Invoice submitted'),
    ('invoice_paid', 'Invoice paid'),
)
