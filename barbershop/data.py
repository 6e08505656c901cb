# barbershop/data.py

from decimal import Decimal

from barbershop import config

shop_settings = {
    "timezone": config.SHOP_TIMEZONE,
    "open_time": "09:00",
    "close_time": "18:00",
    "slot_minutes": 30,
    "lead_hours": config.BOOKING_LEAD_HOURS,
    "pending_ttl_minutes": config.PENDING_APPOINTMENT_TTL_MINUTES,
    "shipping_fee": Decimal("5.99"),
}

# Seed catalog, loaded on startup into an empty database.
# Services and products reference categories by name.
CATEGORIES = [
    {"name": "Haircuts", "type": "service"},
    {"name": "Beard", "type": "service"},
    {"name": "Packages", "type": "service"},
    {"name": "Color Services", "type": "service"},
    {"name": "Specialty Services", "type": "service"},
    {"name": "Kids Services", "type": "service"},
    {"name": "Styling Products", "type": "product"},
    {"name": "Beard Care", "type": "product"},
    {"name": "Shaving", "type": "product"},
    {"name": "Hair Care", "type": "product"},
]

SERVICES = [
    ("Haircuts", "Classic Haircut", "A traditional haircut including a consultation, shampoo, and styling.", "35.00", 45),
    ("Haircuts", "Fade Haircut", "A modern haircut with a gradient effect from the top of the hair to the bottom.", "40.00", 50),
    ("Haircuts", "Buzz Cut", "A short, even-length haircut using electric clippers.", "25.00", 30),
    ("Haircuts", "Scissor Cut", "A precision cut using only scissors for a more textured finish.", "45.00", 60),
    ("Beard", "Beard Trim", "Precision beard shaping and trimming to keep your facial hair looking sharp.", "25.00", 30),
    ("Beard", "Beard Shaping & Styling", "Complete beard grooming with detailed shaping, conditioning, and styling.", "35.00", 45),
    ("Beard", "Traditional Straight Razor Shave", "Classic hot towel treatment and straight razor shave for the smoothest finish.", "40.00", 45),
    ("Packages", "Full Service", "Complete package including haircut, beard trim, and hot towel service.", "55.00", 75),
    ("Packages", "Executive Package", "Premium service with haircut, facial massage, hot towel treatment, and styling.", "75.00", 90),
    ("Packages", "Groom Package", "Special occasion package with haircut, beard grooming, facial, and styling.", "90.00", 120),
    ("Color Services", "Gray Blending", "Subtle color service to reduce the appearance of gray hair without full coverage.", "50.00", 60),
    ("Color Services", "Full Color Service", "Complete color change or coverage with professional hair color products.", "70.00", 90),
    ("Specialty Services", "Hot Towel Treatment", "Relaxing hot towel facial treatment to cleanse and rejuvenate the skin.", "30.00", 30),
    ("Specialty Services", "Facial Treatment", "Deep cleansing facial with premium skincare products and massage.", "45.00", 45),
    ("Kids Services", "Kids Haircut (12 & Under)", "Haircut service specially designed for children with extra care and patience.", "25.00", 30),
]

BARBERS = [
    {"name": "Mike Johnson", "title": "Master Barber", "rating": "5.0",
     "image_url": "https://images.unsplash.com/photo-1534308143481-c55f00be8bd7"},
    {"name": "Alex Rodriguez", "title": "Senior Barber", "rating": "4.5",
     "image_url": "https://images.unsplash.com/photo-1583195764036-6dc248ac07d9"},
    {"name": "Sarah Davis", "title": "Style Specialist", "rating": "4.8",
     "image_url": "https://images.unsplash.com/photo-1595123550441-d377e017de6a"},
    {"name": "James Wilson", "title": "Color Specialist", "rating": "4.7",
     "image_url": "https://images.unsplash.com/photo-1612837017391-52b4eeea2977"},
    {"name": "David Lee", "title": "Junior Barber", "rating": "4.2",
     "image_url": "https://images.unsplash.com/photo-1578176603894-57973e38890f"},
]

PRODUCTS = [
    ("Styling Products", "Premium Styling Pomade", "Strong hold with medium shine for classic styles", "24.99",
     "https://images.unsplash.com/photo-1621607512214-68297480165e", True, "5.0"),
    ("Beard Care", "Premium Beard Oil", "Nourishing formula for a healthy, soft beard", "19.99",
     "https://images.unsplash.com/photo-1594635356394-71bd063b1325", False, "4.0"),
    ("Shaving", "Luxury Shaving Kit", "Complete set for the perfect traditional shave", "79.99",
     "https://images.unsplash.com/photo-1585751119414-ef2636f8aede", False, "5.0"),
    ("Styling Products", "Sea Salt Spray", "Create natural, beachy texture with medium hold", "18.99",
     "https://images.unsplash.com/photo-1567922045116-2a00fae2ed03", False, "4.0"),
]
