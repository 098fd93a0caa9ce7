import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ContactSubmission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Name of the person contacting us', max_length=100)),
                ('email', models.EmailField(help_text='Email address for follow-up', max_length=255, validators=[django.core.validators.EmailValidator()])),
                ('phone', models.CharField(help_text='National phone number, digits only', max_length=20)),
                ('country_code', models.CharField(help_text='International dialing code, e.g. +91', max_length=6)),
                ('company', models.CharField(blank=True, default='', max_length=200)),
                ('subject', models.CharField(help_text='Subject line entered by the submitter', max_length=200)),
                ('service_interest', models.CharField(blank=True, default='', max_length=50)),
                ('budget_range', models.CharField(blank=True, default='', max_length=50)),
                ('message', models.TextField(help_text='The message content (min 20 characters)', max_length=5000, validators=[django.core.validators.MinLengthValidator(20)])),
                ('captcha_score', models.FloatField(blank=True, help_text='reCAPTCHA score, empty when verification was skipped', null=True)),
                ('ip_address', models.CharField(blank=True, default='', help_text='IP address of the submitter (for spam prevention)', max_length=64)),
                ('user_agent', models.TextField(blank=True, default='', help_text='Browser user agent (for spam prevention)')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When the message was submitted')),
            ],
            options={
                'verbose_name': 'Contact Submission',
                'verbose_name_plural': 'Contact Submissions',
                'db_table': 'contact_submissions',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['email'], name='contact_sub_email_idx')],
            },
        ),
    ]
