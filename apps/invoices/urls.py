from django.urls import path
from .views import (
    InvoiceCreateView, MyInvoicesView, PayerInvoicesView, InvoiceCheckView, InvoiceDetailView,
    InvoiceProcessingView, InvoiceMarkPaidView,
)

urlpatterns = [
    path('', InvoiceCreateView.as_view(), name='invoice_create'),
    path('mine/', MyInvoicesView.as_view(), name='my_invoices'),
    path('payer/', PayerInvoicesView.as_view(), name='payer_invoices'),
    path('check/', InvoiceCheckView.as_view(), name='invoice_check'),
    path('<int:invoice_id>/', InvoiceDetailView.as_view(), name='invoice_detail'),
    path('<int:invoice_id>/processing/', InvoiceProcessingView.as_view(), name='invoice_processing'),
    path('<int:invoice_id>/mark-paid/', InvoiceMarkPaidView.as_view(), name='invoice_mark_paid'),
]
