"""Static pools and base sections the generator samples from."""

from adb_insights.config.schemas import Notification, Segment

PLACEHOLDER_AVATAR = "/placeholder.svg?height=32&width=32"

MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

SALE_NAMES = (
    "Emma Johnson", "Liam Smith", "Olivia Brown", "Noah Davis", "Ava Wilson",
    "Ethan Moore", "Sophia Taylor", "Mason Anderson", "Isabella Garcia", "Jacob Martinez",
)

ACTIVITY_USERS = ("John Doe", "Sarah Wilson", "Mike Johnson", "Emily Brown", "David Lee")

ACTIVITY_ACTIONS = (
    "created a new campaign",
    "updated customer profile",
    "completed a purchase",
    "left a product review",
    "subscribed to newsletter",
    "cancelled subscription",
    "updated payment method",
    "downloaded report",
    "shared content on social media",
    "attended webinar",
    "updated billing information",
    "requested support",
)

# name, visitors, percentage, change
TOP_CHANNELS = (
    ("Organic Search", 4520, 45.2, "+12.5%"),
    ("Direct Traffic", 2850, 28.5, "+8.2%"),
    ("Social Media", 1680, 16.8, "+15.3%"),
    ("Email Marketing", 950, 9.5, "+5.1%"),
)

NOTIFICATIONS = (
    Notification(
        title="New customer signed up",
        description="A new customer has joined your platform",
        time="2 minutes ago",
        type="success",
    ),
    Notification(
        title="Revenue milestone reached",
        description="Congratulations! You've reached $50K in monthly revenue",
        time="1 hour ago",
        type="celebration",
    ),
    Notification(
        title="Low inventory alert",
        description='Product "ADmyBRAND Premium" is running low on stock',
        time="3 hours ago",
        type="warning",
    ),
    Notification(
        title="Campaign performance update",
        description="Your latest campaign achieved 125% of target conversions",
        time="1 day ago",
        type="info",
    ),
    Notification(
        title="System maintenance scheduled",
        description="Scheduled maintenance on Feb 1st from 2:00 AM to 4:00 AM",
        time="2 days ago",
        type="info",
    ),
)

TRAFFIC_SOURCES = (
    Segment("Organic Search", 45.2),
    Segment("Direct", 28.5),
    Segment("Social Media", 16.8),
    Segment("Email", 9.5),
)

CONVERSION_FUNNEL = (
    Segment("Visitors", 10000),
    Segment("Leads", 4200),
    Segment("Qualified", 1850),
    Segment("Proposals", 720),
    Segment("Customers", 310),
)

AGE_DISTRIBUTION = (
    Segment("18-24", 18.0),
    Segment("25-34", 34.0),
    Segment("35-44", 24.0),
    Segment("45-54", 14.0),
    Segment("55+", 10.0),
)

DEVICE_TYPES = (
    Segment("Desktop", 52.0),
    Segment("Mobile", 39.0),
    Segment("Tablet", 9.0),
)
