# Package marker
