# radical_backend/content/models.py
"""
Record layouts for the site content collections.

Each resource is a named collection in the record store. List resources
declare the fields an admin may set; ``id`` and the creation timestamp are
always assigned by the service and never taken from input.
"""

MESSAGES = 'messages'
GALLERY = 'gallery'
SERVICES = 'services'
SETTINGS = 'settings'
ABOUT = 'about'

GALLERY_CATEGORIES = ('Stickers', 'Banners', 'Mugs', 'Branding', 'Events')

MESSAGE_FIELDS = ('name', 'email', 'phone', 'message', 'read')
GALLERY_FIELDS = ('title', 'category', 'imageUrl', 'visible')
SERVICE_FIELDS = ('name', 'description', 'category', 'imageUrl', 'visible')

SETTINGS_FIELDS = ('phone', 'address', 'email', 'maintenanceMode')
ABOUT_FIELDS = ('heroTitle', 'heroSubtitle', 'storyTitle', 'storyContent', 'mission', 'vision', 'values')

DEFAULT_SETTINGS = {
    'phone': '0788 470 294',
    'address': 'Chic Building, 2nd Floor, Room F019C',
    'email': 'info@radicaldesign.com',
    'maintenanceMode': False,
}

DEFAULT_ABOUT = {
    'heroTitle': 'About RADICAL DESIGN',
    'heroSubtitle': 'Your trusted partner in printing and media solutions',
    'storyTitle': 'Our Story',
    'storyContent': (
        'RADICAL DESIGN Ltd has been serving businesses and organizations with premium '
        'printing and media solutions. We combine modern technology with traditional '
        'craftsmanship to deliver exceptional results.'
    ),
    'mission': (
        'To deliver premium printing and media solutions that empower businesses to '
        'communicate effectively with their audience.'
    ),
    'vision': 'To be the leading provider of innovative printing and branding solutions in the region.',
    'values': [
        {
            'title': 'Quality Excellence',
            'description': 'Premium materials and professional techniques for every project',
        },
        {
            'title': 'Customer Focus',
            'description': 'Your satisfaction is our top priority in every interaction',
        },
        {
            'title': 'Fast Service',
            'description': 'Quick turnaround without compromising on quality standards',
        },
    ],
}
